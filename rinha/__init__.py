# Rinha language package
# This package provides a parser and tree-walking evaluator for Rinha programs.
from .interpreter import run_program, run_file, Interpreter
from .errors import RinhaError, ParseError

__all__ = [
    'run_program',
    'run_file',
    'Interpreter',
    'RinhaError',
    'ParseError',
]
