import sys

from cellisp.repl import main

sys.exit(main())
