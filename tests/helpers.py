"""
Assertion helpers shared by the test modules.
"""
from typing import List


def find_pair(args: List[str], first: str, second: str) -> bool:
    """Whether first and second appear next to each other in args"""
    return any(args[i] == first and args[i + 1] == second for i in range(len(args) - 1))
