"""
Pydantic models for endpoint query params.

Key features:
- frozen=True: Immutable after normalization
- populate_by_name=True: Accept both alias (camelCase) and field name
- extra='ignore': Unknown query params are ignored

Parsing delegates to utils.normalize so the rules (and the 400 error shape)
match handlers that read request.args directly.

Usage:
    params = AssetListParams.from_args(request.args)
    service.list_assets(page_size=params.page_size, ...)
"""

from typing import Annotated, Any, Mapping, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from constants import DEFAULT_ASSET_PAGE_SIZE, DEFAULT_BUILDING_NAME
from utils.normalize import ValidationError, to_int, to_str


def _page_size(v: Any) -> int:
    return to_int(
        v,
        default=DEFAULT_ASSET_PAGE_SIZE,
        min_value=1,
        field='pageSize',
    )


PageSize = Annotated[int, BeforeValidator(_page_size)]
OptionalStr = Annotated[Optional[str], BeforeValidator(lambda v: to_str(v))]
# Passed through as given (no trimming); only a missing or empty value falls back
BuildingName = Annotated[str, BeforeValidator(lambda v: to_str(v, default=DEFAULT_BUILDING_NAME, strip=False))]


class BaseParamsModel(BaseModel):
    """Base model for all query param schemas."""
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra='ignore',
    )

    @classmethod
    def from_args(cls, args: Mapping[str, Any]):
        """
        Build from request.args.

        Raises:
            utils.normalize.ValidationError: unwrapped from pydantic so the
                error envelope reports the offending field.
        """
        try:
            return cls.model_validate(dict(args.items()))
        except PydanticValidationError as e:
            for err in e.errors():
                cause = (err.get('ctx') or {}).get('error')
                if isinstance(cause, ValidationError):
                    raise cause from e
            raise ValidationError(str(e)) from e


class AssetListParams(BaseParamsModel):
    """/api/assets params."""
    page_size: PageSize = Field(default=DEFAULT_ASSET_PAGE_SIZE, alias='pageSize')
    building: OptionalStr = None
    status: OptionalStr = None


class CountActiveParams(BaseParamsModel):
    """/admin/count-active-assets params."""
    building: BuildingName = DEFAULT_BUILDING_NAME
