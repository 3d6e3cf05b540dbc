"""
Módulo preprocesador para MIPS
"""

from .preprocessor import MacroDefinition, Preprocessor, preprocess, preprocess_file

__all__ = ['MacroDefinition', 'Preprocessor', 'preprocess', 'preprocess_file']
