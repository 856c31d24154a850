#!/usr/bin/env python3
"""
Cron job: append the current 2FA code for the stored seed.

    * * * * * cd /app && python3 scripts/log_2fa_cron.py >> /cron/last_code.txt 2>&1
"""

import sys

from pki2fa_core.otp_cli import main

if __name__ == "__main__":
    sys.exit(main(["log-2fa", *sys.argv[1:]]))
