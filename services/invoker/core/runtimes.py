"""
Where: services/invoker/core/runtimes.py
What: Known Lambda runtime identifiers and their runtime groups.
Why: Handler resolution strategies are selected by language family, not by runtime version.
"""

from enum import Enum
from typing import Dict, List, Optional


class Runtime(str, Enum):
    NODEJS22_X = "nodejs22.x"
    NODEJS20_X = "nodejs20.x"
    NODEJS18_X = "nodejs18.x"
    NODEJS16_X = "nodejs16.x"
    NODEJS14_X = "nodejs14.x"
    NODEJS12_X = "nodejs12.x"
    PYTHON3_13 = "python3.13"
    PYTHON3_12 = "python3.12"
    PYTHON3_11 = "python3.11"
    PYTHON3_10 = "python3.10"
    PYTHON3_9 = "python3.9"
    PYTHON3_8 = "python3.8"
    PYTHON3_7 = "python3.7"
    JAVA21 = "java21"
    JAVA17 = "java17"
    JAVA11 = "java11"
    JAVA8_AL2 = "java8.al2"
    JAVA8 = "java8"
    DOTNET8 = "dotnet8"
    DOTNET6 = "dotnet6"
    DOTNETCORE3_1 = "dotnetcore3.1"
    GO1_X = "go1.x"
    RUBY3_3 = "ruby3.3"
    RUBY3_2 = "ruby3.2"
    RUBY2_7 = "ruby2.7"
    PROVIDED_AL2023 = "provided.al2023"
    PROVIDED_AL2 = "provided.al2"
    PROVIDED = "provided"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_value(cls, value: Optional[str]) -> Optional["Runtime"]:
        """Return the runtime for an identifier, or None if it is not a known runtime."""
        if not value:
            return None
        try:
            return cls(value.strip())
        except ValueError:
            return None


class RuntimeGroup(str, Enum):
    PYTHON = "python"
    NODEJS = "nodejs"
    JAVA = "java"
    DOTNET = "dotnet"
    GO = "go"
    RUBY = "ruby"

    def __str__(self) -> str:
        return self.value

    @property
    def runtimes(self) -> List[Runtime]:
        return [runtime for runtime, group in RUNTIME_GROUPS.items() if group is self]


# Custom runtimes (provided*) have no language family and therefore no group.
RUNTIME_GROUPS: Dict[Runtime, RuntimeGroup] = {
    Runtime.NODEJS22_X: RuntimeGroup.NODEJS,
    Runtime.NODEJS20_X: RuntimeGroup.NODEJS,
    Runtime.NODEJS18_X: RuntimeGroup.NODEJS,
    Runtime.NODEJS16_X: RuntimeGroup.NODEJS,
    Runtime.NODEJS14_X: RuntimeGroup.NODEJS,
    Runtime.NODEJS12_X: RuntimeGroup.NODEJS,
    Runtime.PYTHON3_13: RuntimeGroup.PYTHON,
    Runtime.PYTHON3_12: RuntimeGroup.PYTHON,
    Runtime.PYTHON3_11: RuntimeGroup.PYTHON,
    Runtime.PYTHON3_10: RuntimeGroup.PYTHON,
    Runtime.PYTHON3_9: RuntimeGroup.PYTHON,
    Runtime.PYTHON3_8: RuntimeGroup.PYTHON,
    Runtime.PYTHON3_7: RuntimeGroup.PYTHON,
    Runtime.JAVA21: RuntimeGroup.JAVA,
    Runtime.JAVA17: RuntimeGroup.JAVA,
    Runtime.JAVA11: RuntimeGroup.JAVA,
    Runtime.JAVA8_AL2: RuntimeGroup.JAVA,
    Runtime.JAVA8: RuntimeGroup.JAVA,
    Runtime.DOTNET8: RuntimeGroup.DOTNET,
    Runtime.DOTNET6: RuntimeGroup.DOTNET,
    Runtime.DOTNETCORE3_1: RuntimeGroup.DOTNET,
    Runtime.GO1_X: RuntimeGroup.GO,
    Runtime.RUBY3_3: RuntimeGroup.RUBY,
    Runtime.RUBY3_2: RuntimeGroup.RUBY,
    Runtime.RUBY2_7: RuntimeGroup.RUBY,
}


def runtime_group(runtime: Optional[Runtime]) -> Optional[RuntimeGroup]:
    if runtime is None:
        return None
    return RUNTIME_GROUPS.get(runtime)
