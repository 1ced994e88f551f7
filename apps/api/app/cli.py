"""CLI tools for FindThem administration."""

import click

from app.core.errors import DuplicateEmailError, FindThemError
from app.db.enums import OrganizationType, Role, VerificationStatus
from app.db.models import Organization
from app.db.session import SessionLocal, engine

# Verified organizations available out of the box in a fresh environment
SEED_ORGANIZATIONS = [
    {
        "name": "Missing Children Foundation",
        "type": OrganizationType.NGO.value,
        "contact_email": "contact@mcf.org",
        "contact_phone": "+1-555-0123",
    },
    {
        "name": "City Police Department",
        "type": OrganizationType.POLICE.value,
        "contact_email": "missing@citypolice.gov",
        "contact_phone": "+1-555-0911",
    },
]


@click.group()
def cli():
    """FindThem CLI tools."""
    pass


@cli.command()
def create_tables():
    """
    Create all tables directly from the models.

    For local development only; deployed databases use alembic.

    Example:
        python -m app.cli create-tables
    """
    from app.db.base import Base
    import app.db.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    click.echo("✓ Tables created")


@cli.command()
def seed():
    """
    Insert sample verified organizations (skips ones that already exist).

    Example:
        python -m app.cli seed
    """
    db = SessionLocal()
    try:
        created = 0
        for data in SEED_ORGANIZATIONS:
            existing = db.query(Organization).filter(
                Organization.contact_email == data["contact_email"]
            ).first()
            if existing:
                click.echo(f"  Skipped existing: {data['name']}")
                continue
            db.add(Organization(**data, verification_status=VerificationStatus.VERIFIED.value))
            created += 1
        db.commit()
        click.echo(f"✓ Seeded {created} organization(s)")
    except Exception as e:
        db.rollback()
        click.echo(f"❌ Error: {e}")
        raise
    finally:
        db.close()


@cli.command()
@click.option("--email", required=True, help="Organization contact email")
@click.option(
    "--status",
    required=True,
    type=click.Choice([s.value for s in VerificationStatus]),
    help="New verification status",
)
def set_org_status(email: str, status: str):
    """
    Approve or reject an organization registration.

    Example:
        python -m app.cli set-org-status --email "contact@mcf.org" --status verified
    """
    from app.services import org_service

    db = SessionLocal()
    try:
        org = org_service.get_org_by_contact_email(db, email.strip().lower())
        if not org:
            click.echo(f"❌ Organization not found: {email}")
            return

        old_status = org.verification_status
        org_service.set_verification_status(db, org, status)
        click.echo(f"✓ {org.name}: {old_status} → {org.verification_status}")
    except FindThemError as e:
        click.echo(f"❌ Error: {e}")
    finally:
        db.close()


@cli.command()
@click.option("--email", required=True, help="Admin email address")
@click.option("--name", required=True, help="Admin display name")
@click.password_option(help="Admin password")
def create_admin(email: str, name: str, password: str):
    """
    Create a platform admin account (no organization).

    Example:
        python -m app.cli create-admin --email "admin@findthem.org" --name "Platform Admin"
    """
    from app.services import auth_service

    db = SessionLocal()
    try:
        user = auth_service.create_user(
            db,
            email=email,
            name=name,
            role=Role.ADMIN,
            password=password,
        )
        user.is_verified = True
        db.commit()
        click.echo(f"✓ Created admin: {user.email}")
        click.echo(f"  ID: {user.id}")
    except DuplicateEmailError:
        click.echo(f"❌ User already exists: {email}")
    except FindThemError as e:
        click.echo(f"❌ Error: {e}")
    finally:
        db.close()


if __name__ == "__main__":
    cli()
