import sys

from md2pdf.cli import main

sys.exit(main())
