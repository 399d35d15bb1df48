"""Source parsers for TypeScript files and Angular templates."""

from angular_analyzer.parsers.template_parser import TemplateParser
from angular_analyzer.parsers.typescript_parser import ClassDeclaration, SourceFile, TypeScriptParser

__all__ = [
    'TemplateParser', 'TypeScriptParser', 'SourceFile', 'ClassDeclaration',
]
