import click
from flask.cli import with_appcontext
from sqlalchemy.exc import SQLAlchemyError
from filetracker.extensions import db
from filetracker.models import Status, DirectoryUser, UserLevel, Department


def init_cli(app):
    app.cli.add_command(init_db_command)
    app.cli.add_command(seed_statuses_command)
    app.cli.add_command(create_directory_user_command)


@click.command("init-db")
@with_appcontext
def init_db_command():
    """Create the filetracker tables fresh and seed statuses"""
    db.drop_all(bind_key=None)
    db.create_all(bind_key=None)
    Status.get_predefined_statuses()
    click.echo("Database tables created fresh.")


@click.command("seed-statuses")
@with_appcontext
def seed_statuses_command():
    """Seed the movement status lookup table"""
    try:
        for status in Status.get_predefined_statuses():
            click.echo(f"{status.status_id}: {status.status_name}")
        click.echo("Statuses have been seeded/updated successfully!")
    except SQLAlchemyError as e:
        db.session.rollback()
        click.echo(f"Error seeding statuses: {str(e)}", err=True)


@click.command("create-directory-user")
@click.option('--name', required=True, help='Display name')
@click.option('--email', required=True, help='Login e-mail')
@click.option('--password', required=True, help='Password')
@click.option('--role', default='staff', help='User level name (admin, super_admin, HR, staff)')
@click.option('--department', default=None, help='Department name')
@with_appcontext
def create_directory_user_command(name, email, password, role, department):
    """Create a user in the shared directory (development only)"""
    db.create_all(bind_key='shared')
    if DirectoryUser.query.filter_by(usr_email=email).first():
        click.echo(f"User '{email}' already exists")
        return

    level = UserLevel.query.filter_by(userlevelname=role).first()
    if not level:
        level = UserLevel(userlevelname=role)
        db.session.add(level)

    dept = None
    if department:
        dept = Department.query.filter_by(department=department).first()
        if not dept:
            dept = Department(department=department)
            db.session.add(dept)

    user = DirectoryUser(usr_name=name, usr_email=email, level=level, department=dept)
    user.set_password(password)
    db.session.add(user)
    try:
        db.session.commit()
        click.echo(f"User '{email}' has been created with id {user.user_id}")
    except SQLAlchemyError as e:
        db.session.rollback()
        click.echo(f"Error creating user: {str(e)}", err=True)
