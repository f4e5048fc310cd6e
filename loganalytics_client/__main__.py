# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Eul Bite

"""
Allow running loganalytics_client as a module:
    python -m loganalytics_client send --log-type MyLog '[{"msg": "hi"}]'
    python -m loganalytics_client sign --length 2
"""

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
