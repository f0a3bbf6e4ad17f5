from ...core.database import db, generate_id, isoformat, utcnow


class NewsletterSubscriber(db.Model):
    __tablename__ = 'newsletter_subscribers'

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    email = db.Column(db.String(255), unique=True, nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)
    subscribed_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'isActive': self.is_active,
            'subscribedAt': isoformat(self.subscribed_at),
            'updatedAt': isoformat(self.updated_at),
        }

    def __repr__(self):
        return f'<NewsletterSubscriber {self.email}>'
