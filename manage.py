#!/usr/bin/env python
"""Command-line entry point for the Tele Heal backend (runserver, check_backend, ensure_demo_accounts, ...)."""
import os
import sys


def main() -> None:
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'teleheal.settings')
    from django.core.management import execute_from_command_line

    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
