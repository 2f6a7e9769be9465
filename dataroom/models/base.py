import uuid


def generate_uuid():
    """Generate a UUID string primary key"""
    return str(uuid.uuid4())
