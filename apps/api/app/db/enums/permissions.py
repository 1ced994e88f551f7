"""Role permission helper sets."""

from app.db.enums.auth import Role

# Roles that can file and manage cases (organization staff)
ROLES_CAN_MANAGE_CASES = {
    Role.NGO_ADMIN,
    Role.NGO_MEMBER,
    Role.POLICE,
    Role.ADMIN,
}

# Roles that bypass organization ownership checks
ROLES_CROSS_ORG = {Role.ADMIN}

# Roles a self-service organization registration may request
ROLES_CAN_SELF_REGISTER = {Role.NGO_ADMIN, Role.NGO_MEMBER, Role.POLICE}
