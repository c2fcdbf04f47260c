# Copyright (c) Syntropy Systems
"""expose command line interface."""
