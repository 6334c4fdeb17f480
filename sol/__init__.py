#!/usr/bin/env python3.14
# SPDX-License-Identifier: Apache-2.0

"""
sol – lexer, parser and tree-walking interpreter for the sol toy language.
"""
