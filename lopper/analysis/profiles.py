"""Ecosystem profiles for the shared attribution engine."""

from __future__ import annotations

import re
import sys

from lopper.analysis.attribution import EcosystemProfile
from lopper.models import Language

_HEADER_EXT_RE = re.compile(r"\.(h|hh|hpp|hxx|h\+\+|inl|ipp)$")

CPP_STD_HEADERS = frozenset({
    "algorithm", "array", "atomic", "bitset", "cassert", "cctype", "cerrno", "cfenv", "cfloat",
    "charconv", "chrono", "cinttypes", "ciso646", "climits", "clocale", "cmath", "codecvt",
    "compare", "complex", "condition_variable", "coroutine", "csetjmp", "csignal", "cstdarg",
    "cstddef", "cstdint", "cstdio", "cstdlib", "cstring", "ctime", "cuchar", "cwchar", "cwctype",
    "deque", "exception", "execution", "filesystem", "forward_list", "fstream", "functional",
    "future", "initializer_list", "iomanip", "ios", "iosfwd", "iostream", "istream", "iterator",
    "latch", "limits", "list", "locale", "map", "memory", "memory_resource", "mutex", "new",
    "numbers", "numeric", "optional", "ostream", "queue", "random", "ranges", "ratio", "regex",
    "scoped_allocator", "semaphore", "set", "shared_mutex", "source_location", "span", "sstream",
    "stack", "stdexcept", "stop_token", "streambuf", "string", "string_view", "strstream",
    "syncstream", "system_error", "thread", "tuple", "type_traits", "typeindex", "typeinfo",
    "unordered_map", "unordered_set", "utility", "valarray", "variant", "vector",
    "assert", "ctype", "errno", "float", "inttypes", "math", "setjmp", "signal", "stdarg",
    "stddef", "stdint", "stdio", "stdlib", "time", "wchar", "wctype", "stdbool",
    "unistd", "fcntl", "pthread", "dirent", "dlfcn", "strings",
})


def _python_canonical(value: str) -> str:
    return value.replace("_", "-")


def _go_is_stdlib(module: str) -> bool:
    first = module.split("/", 1)[0]
    return module == "c" or "." not in first


def _strip_header_ext(value: str) -> str:
    return _HEADER_EXT_RE.sub("", value)


def _cpp_is_std_header(module: str) -> bool:
    if module.startswith(("sys/", "bits/", "linux/")):
        return True
    base = _strip_header_ext(module.rsplit("/", 1)[-1])
    return base in CPP_STD_HEADERS


DOTNET_PROFILE = EcosystemProfile(
    name=Language.DOTNET.value,
    separators=(".",),
    stdlib_prefixes=("system", "microsoft.csharp", "microsoft.visualbasic", "microsoft.win32"),
    weighted_ranking=True,
)

GO_PROFILE = EcosystemProfile(
    name=Language.GO.value,
    separators=("/",),
    stdlib_check=_go_is_stdlib,
    fuzzy=False,
    fallback_depth=3,
    weighted_ranking=True,
)

JVM_PROFILE = EcosystemProfile(
    name=Language.JVM.value,
    separators=(".",),
    stdlib_prefixes=("java", "javax", "kotlin", "jdk", "sun"),
    fuzzy=False,
    weighted_ranking=True,
)

PYTHON_PROFILE = EcosystemProfile(
    name=Language.PYTHON.value,
    separators=(".",),
    stdlib_modules=frozenset(name.lower() for name in sys.stdlib_module_names),
    canonicalize=_python_canonical,
    fallback_depth=1,
)

CPP_PROFILE = EcosystemProfile(
    name=Language.CPP.value,
    separators=("/",),
    stdlib_check=_cpp_is_std_header,
    canonicalize=_strip_header_ext,
    fallback_depth=1,
    weighted_ranking=True,
)

PROFILES: dict[Language, EcosystemProfile] = {
    Language.DOTNET: DOTNET_PROFILE,
    Language.GO: GO_PROFILE,
    Language.JVM: JVM_PROFILE,
    Language.PYTHON: PYTHON_PROFILE,
    Language.CPP: CPP_PROFILE,
}
