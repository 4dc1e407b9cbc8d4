"""Import query root definitions."""

from __future__ import annotations

import graphene

from ..profiles import get_import_profile
from ..services import generate_template, render_template_csv, require_import_access
from .types import ImportTemplateType


class ImportQuery(graphene.ObjectType):
    import_template = graphene.Field(
        ImportTemplateType,
        kind=graphene.String(required=True),
    )

    def resolve_import_template(self, info, kind: str):
        user = getattr(info.context, "user", None)
        require_import_access(user)
        profile = get_import_profile(kind)
        template = generate_template(profile)
        return {
            "kind": profile.kind,
            "headers": template["headers"],
            "sample": template["sample"],
            "csv": render_template_csv(profile),
        }
