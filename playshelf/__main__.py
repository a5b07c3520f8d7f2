# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

import sys

from playshelf.application import main

sys.exit(main())
