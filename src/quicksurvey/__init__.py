"""
quicksurvey: surveys stored as CSV files in a GitHub repository.

No backend of its own: survey definitions and responses are committed
through the GitHub contents API, one directory per survey.

    surveys/{id}/survey.csv       id,title,description,questions
    surveys/{id}/responses.csv    response_id,<question text>...

Layers (leaves first):
    csv_codec     Survey <-> CSV text, no I/O
    store         revisioned read/write by path (GitHub or in-memory)
    repository    list / load / save surveys over a store
    service       create survey, submit response, list surveys
    results       per-question tabulation
"""

__version__ = "0.1.0"
