from werkzeug.security import check_password_hash, generate_password_hash

from ...core.database import db, generate_id, isoformat, utcnow


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    username = db.Column(db.String(20), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    first_name = db.Column(db.String(100))
    last_name = db.Column(db.String(100))
    avatar = db.Column(db.String(500))
    bio = db.Column(db.String(500))
    is_admin = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    posts = db.relationship('Post', back_populates='author', cascade='all, delete-orphan')

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def to_dict(self):
        """Public representation; the password hash never leaves the model"""
        return {
            'id': self.id,
            'email': self.email,
            'username': self.username,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'avatar': self.avatar,
            'bio': self.bio,
            'isAdmin': self.is_admin,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }

    def to_author_dict(self, include_bio=False):
        data = {
            'id': self.id,
            'username': self.username,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'avatar': self.avatar,
            'isAdmin': self.is_admin,
        }
        if include_bio:
            data['bio'] = self.bio
        return data

    def __repr__(self):
        return f'<User {self.username}>'
