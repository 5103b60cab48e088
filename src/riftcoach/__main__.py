# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

from riftcoach.cli import main

if __name__ == "__main__":
    main()
