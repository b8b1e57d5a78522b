from caseapi.cli import main

raise SystemExit(main())
