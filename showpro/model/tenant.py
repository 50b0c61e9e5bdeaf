from sqlmodel import Field

from showpro.model.base import BaseModel


class Tenant(BaseModel, table=True):
    """
    Modelo Tenant - raiz do multi-tenant (não tem tenant_id).

    O `slug` é imutável depois de atribuído: não existe caminho de update que o altere.
    """

    __tablename__ = "tenant"

    name: str = Field(index=True)
    slug: str = Field(unique=True, index=True)
    domain: str | None = Field(default=None, nullable=True)
    locale: str = Field(default="en-US")

    # Branding
    primary_color: str = Field(default="#4F46E5")
    logo_url: str | None = Field(default=None, nullable=True)
    font_family: str | None = Field(default=None, nullable=True)
