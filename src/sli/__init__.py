"""
SLI Module
==========

Bounded Context for retrieving service level indicators from Sumo Logic.

Responsibilities:
- Answer get-sli.triggered events addressed to the "sumologic" provider
- Render sli.yaml query templates for the requested indicators
- Translate the quantize operator into metrics API parameters
- Query Sumo Logic and report values in get-sli.finished
"""

__version__ = "0.1.0"
