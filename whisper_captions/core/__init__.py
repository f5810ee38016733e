"""Core caption assembly and intermediate representation modules.

WHY: The core package holds the stable heart of the converter — the
record/caption dataclasses and the caption assembly fold. Every
recognizer adapter produces these records and every formatter consumes
these captions.

HOW: ir.py defines the data structures, assembler.py turns records into
captions.

RULES:
- IR dataclasses are the contract — change with care
- Assembly logic is format-agnostic — no formatter-specific logic here
- No I/O anywhere in this package
"""
