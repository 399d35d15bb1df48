"""JSON output generation.

Renders the structural model of an analysis run as JSON, either as a
string or into a file.
"""

import json
import os
from datetime import datetime, timezone
from typing import Any

from angular_analyzer.domain.models import AnalysisResult

ANALYZER_VERSION = '1.0.0'


class JSONDumper:
    """Serializes an AnalysisResult.

    Output structure:
        {
          "_metadata": {...},
          "routeMap": {"components": [...], "redirections": [...]},
          "componentMap": [{"info": {...}, "widgetEventMaps": [...]}]
        }

    Args:
        pretty: Whether to pretty-print JSON (default True).
    """

    def __init__(self, pretty: bool = True) -> None:
        self._indent = 2 if pretty else None

    def build(self, result: AnalysisResult, project: str = '') -> dict[str, Any]:
        """Build the JSON document for a result."""
        return {
            '_metadata': {
                'analyzer_version': ANALYZER_VERSION,
                'analyzed_at': datetime.now(timezone.utc).isoformat(),
                'project': project,
                'total_components': len(result.component_map),
                'total_routes': len(result.route_map.components),
            },
            **result.to_dict(),
        }

    def dumps(self, result: AnalysisResult, project: str = '') -> str:
        return json.dumps(self.build(result, project), indent=self._indent, ensure_ascii=False)

    def write(self, result: AnalysisResult, path: str, project: str = '') -> None:
        """Write the result to ``path``, creating parent directories."""
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.build(result, project), f, indent=self._indent, ensure_ascii=False)
