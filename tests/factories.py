"""
Test data factories for generating test objects.

This module provides Factory Boy factories for creating test data objects
with realistic default values and easy customization. The factories only
build instances; ``persist`` adds them through an async session.
"""

import uuid

import factory

from models import File, Folder, User


class UserFactory(factory.Factory):
    """Factory for creating User test instances."""

    class Meta:
        model = User

    id = factory.LazyFunction(uuid.uuid4)
    auth_user_id = factory.LazyFunction(lambda: f"auth_user_{uuid.uuid4()}")
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    username = factory.Sequence(lambda n: f"testuser{n}")
    is_active = True


class FolderFactory(factory.Factory):
    """Factory for creating Folder test instances."""

    class Meta:
        model = Folder

    id = factory.LazyFunction(uuid.uuid4)
    name = factory.Sequence(lambda n: f"Folder {n}")
    parent_id = None
    is_ai_generated = False
    # user_id will be passed when creating the folder


class FileFactory(factory.Factory):
    """Factory for creating File test instances."""

    class Meta:
        model = File

    id = factory.LazyFunction(uuid.uuid4)
    original_name = factory.Faker("file_name", extension="pdf")
    display_name = factory.LazyAttribute(lambda obj: obj.original_name)
    file_type = "application/pdf"
    file_size = factory.Faker("random_int", min=100, max=500_000)
    storage_path = factory.LazyAttribute(
        lambda obj: f"uploads/{uuid.uuid4()}.{obj.original_name.rsplit('.', 1)[-1]}"
    )
    tags = factory.LazyFunction(list)
    ai_generated = True
    folder_id = None
    file_metadata = factory.LazyFunction(dict)
    # user_id will be passed when creating the file


async def persist(session, *instances):
    """Add and commit instances; returns the single instance or the list."""
    session.add_all(instances)
    await session.commit()
    for instance in instances:
        await session.refresh(instance)
    return instances[0] if len(instances) == 1 else list(instances)


async def create_files(session, user_id: uuid.UUID, specs: list[tuple[str, str]], **kwargs) -> list[File]:
    """Create one file per ``(original_name, mime_type)`` pair."""
    files = [
        FileFactory.build(
            user_id=user_id, original_name=name, display_name=name, file_type=mime_type, **kwargs
        )
        for name, mime_type in specs
    ]
    result = await persist(session, *files)
    return result if isinstance(result, list) else [result]
