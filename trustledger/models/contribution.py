"""
Contribution - one authored, versioned value for a field of a subject.
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Type, Union
from pydantic import BaseModel, Field

from .base import BaseEntity


class ContributionType(str, Enum):
    """Which field of which kind of subject a contribution edits."""
    EDIT_PRODUCT_NAME = "EditProductName"
    EDIT_PRODUCT_CATEGORY_NAME = "EditProductCategoryName"
    EDIT_PRODUCT_LABEL_NAME = "EditProductLabelName"
    ASSIGN_CATEGORY_TO_PRODUCT = "AssignCategoryToProduct"
    ASSIGN_LABEL_TO_PRODUCT = "AssignLabelToProduct"
    ASSIGN_TAG_TO_PRODUCT = "AssignTagToProduct"
    ASSIGN_COMPANY_TO_PRODUCT = "AssignCompanyToProduct"
    REMOVE_COMPANY_FROM_PRODUCT = "RemoveCompanyFromProduct"
    EDIT_COMPANY_NAME = "EditCompanyName"
    EDIT_STORE_NAME = "EditStoreName"
    ASSIGN_COMPANY_TO_STORE = "AssignCompanyToStore"
    EDIT_INFO_SOURCE_NAME = "EditInfoSourceName"


class TextPayload(BaseModel):
    """A proposed text value, e.g. a name."""
    kind: Literal["text"] = "text"
    text: str


class ReferencePayload(BaseModel):
    """A proposed link to another entity, e.g. a category assignment."""
    kind: Literal["reference"] = "reference"
    reference_uuid: str


Payload = Annotated[Union[TextPayload, ReferencePayload], Field(discriminator="kind")]


class Contribution(BaseEntity):
    """
    A proposed value for (subject_uuid, type).

    History is append-only: an edit disables the current row and adds a
    new one, so payload and author never change after creation. Only
    trust_score (derived) and enabled (version tag) are ever rewritten.
    """
    type: ContributionType
    subject_uuid: str
    payload: Payload
    author_uuid: str
    trust_score: float = Field(default=0.0, ge=0.0, le=1.0)
    enabled: bool = True

    @property
    def text(self) -> Optional[str]:
        """Text value, if this is a text contribution."""
        return self.payload.text if isinstance(self.payload, TextPayload) else None

    @property
    def reference_uuid(self) -> Optional[str]:
        """Referenced entity UUID, if this is a reference contribution."""
        if isinstance(self.payload, ReferencePayload):
            return self.payload.reference_uuid
        return None


# Edits carry a text value; assignments and removals point at another entity
_REFERENCE_TYPES = {
    ContributionType.ASSIGN_CATEGORY_TO_PRODUCT,
    ContributionType.ASSIGN_LABEL_TO_PRODUCT,
    ContributionType.ASSIGN_TAG_TO_PRODUCT,
    ContributionType.ASSIGN_COMPANY_TO_PRODUCT,
    ContributionType.REMOVE_COMPANY_FROM_PRODUCT,
    ContributionType.ASSIGN_COMPANY_TO_STORE,
}


def payload_class_for(contribution_type: ContributionType) -> Type[BaseModel]:
    """TextPayload or ReferencePayload, whichever the contribution type carries."""
    return ReferencePayload if contribution_type in _REFERENCE_TYPES else TextPayload
