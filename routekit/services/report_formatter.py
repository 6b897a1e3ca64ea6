"""Report formatting for lookup and propagation results.

Converts result models into JSON or YAML text for display.
"""

import json
from typing import Union

import yaml

from routekit.models.reports import DNSLookupResult, PropagationReport

Report = Union[DNSLookupResult, PropagationReport]


class ReportFormatter:
    """Generates formatted reports from result models.

    Provides static methods for JSON and YAML output.
    """

    @staticmethod
    def generate_json_report(report: Report) -> str:
        """Generate JSON-formatted report.

        Args:
            report: A DNSLookupResult or PropagationReport.

        Returns:
            str: Pretty-printed JSON string with sorted keys for determinism.

        Example:
            >>> report = PropagationReport(...)
            >>> print(ReportFormatter.generate_json_report(report))
            {
              "domain": "example.com",
              "is_consistent": true,
              ...
            }
        """
        return json.dumps(report.to_json(), indent=2, sort_keys=True)

    @staticmethod
    def generate_yaml_report(report: Report) -> str:
        """Generate YAML-formatted report.

        Keys keep the model's field order, which reads better than sorted keys
        for humans.

        Args:
            report: A DNSLookupResult or PropagationReport.

        Returns:
            str: YAML document.
        """
        return yaml.safe_dump(
            report.to_json(), default_flow_style=False, sort_keys=False
        )
