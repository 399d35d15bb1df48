"""Call classification for event handler bodies.

The default classifier matches substrings of the callee text
(``this.router.navigate`` → navigation, ``this.userService.save`` →
backend). This is a heuristic: a callee such as ``this.serviceLevel()``
is classified as backend. Swap in another CallClassifier for a more
precise resolver.
"""

from typing import Protocol


class CallClassifier(Protocol):
    """Decides what kind of call a callee expression is."""

    def is_navigation(self, caller: str) -> bool:
        ...

    def is_backend(self, caller: str) -> bool:
        ...


class KeywordCallClassifier:
    """Classifies calls by keyword containment in the callee text.

    Navigation matching is case-sensitive, backend matching is not.
    """

    def __init__(self, navigation_token: str = 'navigate', backend_token: str = 'service'):
        self.navigation_token = navigation_token
        self.backend_token = backend_token.lower()

    def is_navigation(self, caller: str) -> bool:
        return self.navigation_token in caller

    def is_backend(self, caller: str) -> bool:
        return self.backend_token in caller.lower()
