#!/usr/bin/env python

from aternos_bot.cli import main


if __name__ == "__main__":
    main()
