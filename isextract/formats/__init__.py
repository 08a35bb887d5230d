# -*- coding:utf-8 -*-
# Author: Kei Choi(hanul93@gmail.com)

"""
isextract Format Readers

pe       - locates the overlay and the version strings of a setup executable
ishield  - walks the InstallShield overlay
cryptolib - payload cipher and inflation
"""
