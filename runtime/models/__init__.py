"""
Pydantic / datamodels used by the Nogger runtime.

Split into:
- log_models: Event + EventType + stream selectors + SummaryLine
- api_models: HTTP request/response schemas
"""
