"""larascope: project-type detection and structure analysis for Laravel codebases.

Public API:
    ProjectClassifier(project_root) -> detect_category(), get_confidence(), describe()
    ProjectAnalyzer(settings) -> analyze_project(options)
"""

SERVICE_NAME = "larascope"
__version__ = "1.0.0"
