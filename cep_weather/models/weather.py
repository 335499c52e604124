"""
Pydantic models for upstream payloads, domain values and API responses.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ============================================================================
# UPSTREAM PAYLOADS
# ============================================================================


class ViaCepPayload(BaseModel):
    """
    ViaCEP ``/ws/<cep>/json/`` response body.

    A ``null`` document or ``null`` field reads as absent, so it resolves
    to "not found" rather than a decode failure.
    """
    localidade: str = Field(
        default="",
        description="City name"
    )
    erro: bool = Field(
        default=False,
        description="Set by ViaCEP when the CEP does not exist"
    )

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def null_document_is_empty(cls, data: Any) -> Any:
        if data is None:
            return {}
        return data

    @field_validator("localidade", "erro", mode="before")
    @classmethod
    def null_field_is_default(cls, v: Any, info) -> Any:
        if v is None:
            return cls.model_fields[info.field_name].default
        return v


class WeatherApiCurrent(BaseModel):
    temp_c: float = Field(..., allow_inf_nan=False)

    model_config = ConfigDict(extra="ignore")


class WeatherApiPayload(BaseModel):
    """WeatherAPI ``/v1/current.json`` response body."""
    current: WeatherApiCurrent

    model_config = ConfigDict(extra="ignore")


# ============================================================================
# DOMAIN VALUES
# ============================================================================


class CityLookupResult(BaseModel):
    """Outcome of resolving a CEP to a city."""
    city: str = ""
    found: bool = False

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_payload(cls, payload: ViaCepPayload) -> "CityLookupResult":
        city = payload.localidade
        return cls(city=city, found=not payload.erro and city != "")


class TemperatureReading(BaseModel):
    """Current temperature for a city."""
    celsius: float

    model_config = ConfigDict(frozen=True)


# ============================================================================
# RESPONSE BODIES
# ============================================================================


class WeatherResult(BaseModel):
    """Temperature in the three supported scales."""
    temp_C: float = Field(..., description="Temperature in Celsius")
    temp_F: float = Field(..., description="Temperature in Fahrenheit")
    temp_K: float = Field(..., description="Temperature in Kelvin")

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "temp_C": 25.0,
                "temp_F": 77.0,
                "temp_K": 298.15
            }
        }
    )


class ErrorResponse(BaseModel):
    """Error response schema."""
    message: str = Field(
        ...,
        min_length=1,
        description="Error message"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "message": "invalid zipcode"
            }
        }
    }


class HealthResponse(BaseModel):
    """Health check response schema."""
    status: str
    service: str
    version: str
    weather_api_key_configured: bool
