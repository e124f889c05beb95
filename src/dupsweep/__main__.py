from dupsweep.cli import main

raise SystemExit(main())
