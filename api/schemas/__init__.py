"""
API Schemas - Pydantic models for request/response validation

These schemas define the contract between the API and clients.
Set records themselves stay free-form dicts, as stored.
"""
