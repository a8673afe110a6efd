"""API request and response contracts (Pydantic), grouped by router."""
