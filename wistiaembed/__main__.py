import sys

from wistiaembed.main import main

sys.exit(main())
