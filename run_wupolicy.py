# SPDX-License-Identifier: LGPL-3.0-or-later
#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Standalone launcher. This is the file the installer copies into the install
# dir when running from a source checkout, so it must not be named like the package.
from wupolicy.__main__ import main

if __name__ == "__main__":
    main()
