import sys

from array_tool.main import main

sys.exit(main())
