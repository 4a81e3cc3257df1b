from fastapi import Depends

from portal.api.deps import require_authenticated, require_roles
from portal.core.enums import Role

admin_only = require_roles(Role.admin)

# authenticated first, then admin; both must pass
ADMIN_GATE = [Depends(require_authenticated), Depends(admin_only)]
