"""
Core Package.

Contains the generation backend:
- Go lexer, parser and syntax tree (``golang``)
- Package loading
- Proxy transformation passes (``proxy``)
- Generation engine, output writer and trace logger
"""
