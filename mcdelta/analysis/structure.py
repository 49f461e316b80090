# mcdelta/analysis/structure.py
"""
Lightweight structural analysis of Java sources.

Regex based, so it reads decompiled output that doesn't always compile:
- package and import declarations
- class / interface / enum / record declarations with extends / implements
- method signatures (constructors are skipped)

Methods are attributed to the closest preceding type declaration.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional, Tuple, Union

from mcdelta.analysis.models import ClassInfo, CodeStructure, MethodSignature
from mcdelta.logging.logger import get_logger
from mcdelta.logging.tags import PIPELINE

logger = get_logger(__name__)

_STRIP = re.compile(
    r'"(?:\\.|[^"\\\n])*"'  # string literal
    r"|'(?:\\.|[^'\\\n])*'"  # char literal
    r"|//[^\n]*"  # line comment
    r"|/\*.*?\*/",  # block comment
    re.S,
)
_PACKAGE = re.compile(r"^\s*package\s+([\w.]+)\s*;", re.M)
_IMPORT = re.compile(r"^\s*import\s+(static\s+)?([\w.]+(?:\.\*)?)\s*;", re.M)
_TYPE_DECL = re.compile(r"\b(class|interface|enum|record)\s+([A-Za-z_$][\w$]*)([^{;]*)\{")
_GENERIC = re.compile(r"<[^<>]*>")
_EXTENDS = re.compile(r"\bextends\s+(.+?)(?=\bimplements\b|\bpermits\b|$)", re.S)
_IMPLEMENTS = re.compile(r"\bimplements\s+(.+?)(?=\bpermits\b|$)", re.S)
_METHOD = re.compile(
    r"(?:\b(public|protected|private)\s+)?"
    r"(?:(?:static|final|abstract|synchronized|native|default|strictfp)\s+)*"
    r"(?:<[^;{}()]*?>\s+)?"
    r"([\w$.]+(?:\s*<[^;{}()]*?>)?(?:\s*\[\s*\])*)\s+"
    r"([A-Za-z_$][\w$]*)\s*\(([^()]*)\)\s*"
    r"(?:throws\s+[\w.,\s]+)?[{;]"
)
_NOT_A_TYPE = frozenset(
    {
        "return", "new", "else", "throw", "case", "if", "while", "for", "switch",
        "catch", "synchronized", "do", "try", "assert", "yield",
        "class", "interface", "enum", "record", "package", "import",
        # A constructor reads as "<modifier> Name(...)"
        "public", "protected", "private", "static", "final", "abstract",
    }
)


def _strip_comments(text: str) -> str:
    def repl(match: re.Match) -> str:
        token = match.group(0)
        if token.startswith("/"):
            return " "
        return '""'

    return _STRIP.sub(repl, text)


def _strip_generics(text: str) -> str:
    previous = None
    while previous != text:
        previous = text
        text = _GENERIC.sub("", text)
    return text


def _split_names(text: str) -> List[str]:
    return [part.strip() for part in text.split(",") if part.strip()]


def _split_parameters(params: str) -> List[str]:
    """Split a parameter list on top-level commas (generics may contain commas)."""
    parts, depth, current = [], 0, []
    for ch in params:
        if ch == "<":
            depth += 1
        elif ch == ">":
            depth -= 1
        if ch == "," and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
    parts.append("".join(current))
    return [p.strip() for p in parts if p.strip()]


def _parameter_type(param: str) -> str:
    tokens = [t for t in param.split() if not t.startswith("@") and t != "final"]
    if len(tokens) <= 1:
        return " ".join(tokens)
    return " ".join(tokens[:-1])


def _import_target(static: bool, name: str) -> str:
    """
    What an import depends on.

    `import static a.b.C.*` pulls in members of the class a.b.C, not a
    package, so the wildcard is dropped. Other imports are kept as written.
    """
    if static and name.endswith(".*"):
        return name[:-2]
    return name


def analyze_java_source(text: str, source: Optional[Path] = None) -> List[ClassInfo]:
    """
    Extract the type declarations of one Java compilation unit.

    Every returned ClassInfo carries the file's imports.
    """
    code = _strip_comments(text)

    package_match = _PACKAGE.search(code)
    package = package_match.group(1) if package_match else ""
    imports = {_import_target(bool(static), name) for static, name in _IMPORT.findall(code)}

    declared: List[Tuple[int, ClassInfo]] = []
    for match in _TYPE_DECL.finditer(code):
        kind, name, tail = match.group(1), match.group(2), match.group(3)
        tail = _strip_generics(tail)
        if kind == "record":
            tail = re.sub(r"^\s*\([^)]*\)", "", tail)

        info = ClassInfo(name=name, package=package, kind=kind, imports=set(imports), source=source)

        extends = _EXTENDS.search(tail)
        if extends:
            names = _split_names(extends.group(1))
            if kind == "interface":
                info.interfaces.extend(names)
            elif names:
                info.superclass = names[0]

        implements = _IMPLEMENTS.search(tail)
        if implements:
            info.interfaces.extend(_split_names(implements.group(1)))

        declared.append((match.start(), info))

    if not declared:
        return []

    for match in _METHOD.finditer(code):
        return_type, name = match.group(2), match.group(3)
        if return_type in _NOT_A_TYPE or name in _NOT_A_TYPE:
            continue

        owner = None
        for start, info in declared:
            if start < match.start():
                owner = info
            else:
                break
        if owner is None:
            continue

        owner.methods.append(
            MethodSignature(
                name=name,
                return_type=" ".join(return_type.split()),
                parameters=tuple(_parameter_type(p) for p in _split_parameters(match.group(4))),
                visibility=match.group(1) or "package",
            )
        )

    return [info for _, info in declared]


def analyze_code(path: Union[str, Path]) -> CodeStructure:
    """
    Analyze a Java source tree (directory) or a single source file.

    Unreadable files are logged and counted, not fatal.

    Raises:
        FileNotFoundError: If the path doesn't exist
    """
    root = Path(path)
    if not root.exists():
        raise FileNotFoundError(f"Mod report not found: {root}")

    files = sorted(root.rglob("*.java")) if root.is_dir() else [root]
    structure = CodeStructure()

    for file in files:
        try:
            text = file.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.error(f"{PIPELINE} Error analyzing file {file}: {e}")
            structure.files_failed += 1
            continue

        structure.files_analyzed += 1
        for info in analyze_java_source(text, source=file):
            structure.classes[info.qualified_name] = info

    logger.debug(
        f"{PIPELINE} Analyzed {structure.files_analyzed} files: "
        f"{len(structure.classes)} classes, {structure.method_count} methods"
    )
    return structure


__all__ = ["analyze_java_source", "analyze_code"]
