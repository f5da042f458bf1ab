from models import db, new_id, TimestampMixin

# Product model
class Product(TimestampMixin, db.Model):
    __tablename__ = 'products'
    __table_args__ = (
        db.CheckConstraint('quantity_in_stock >= 0', name='ck_products_stock_non_negative'),
    )
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(128), nullable=False)
    description = db.Column(db.Text, nullable=True)
    price = db.Column(db.Float, nullable=False)
    quantity_in_stock = db.Column(db.Integer, nullable=False, default=0)
    category_id = db.Column(db.String(36), db.ForeignKey('categories.id'), nullable=False)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False)

    category = db.relationship('Category', backref=db.backref('products', lazy='dynamic'))
    user = db.relationship('User', backref=db.backref('products', lazy='dynamic'))

    def __repr__(self):
        return f'<Product {self.name}>'

    def is_low_stock(self, threshold):
        return self.quantity_in_stock < threshold

    def to_dict(self, include_relations=False):
        data = {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'price': self.price,
            'quantity_in_stock': self.quantity_in_stock,
            'category_id': self.category_id,
            'user_id': self.user_id,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_relations:
            data['category'] = self.category.to_dict() if self.category else None
            data['user'] = self.user.to_dict() if self.user else None
        return data
