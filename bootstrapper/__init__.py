# bootstrapper/__init__.py
# -*- coding: utf-8 -*-
"""
Fresh-Mac bootstrapper: installs prerequisites, starts Syncthing, registers
the hub device and the shared folder, and waits for the first sync.
"""
