from tgtt.cli import main

raise SystemExit(main())
