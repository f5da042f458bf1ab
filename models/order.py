from models import db, new_id, TimestampMixin

class Order(TimestampMixin, db.Model):
    __tablename__ = 'orders'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    date = db.Column(db.DateTime, nullable=False)
    total_price = db.Column(db.Float, nullable=False, default=0)
    customer_name = db.Column(db.String(128), nullable=False)
    customer_email = db.Column(db.String(255), nullable=False)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False)
    user = db.relationship('User', backref=db.backref('orders', lazy='dynamic'))

    def __repr__(self):
        return f'<Order {self.customer_name} {self.total_price}>'

    def to_dict(self, include_relations=False):
        data = {
            'id': self.id,
            'date': self.date.isoformat() if self.date else None,
            'total_price': self.total_price,
            'customer_name': self.customer_name,
            'customer_email': self.customer_email,
            'user_id': self.user_id,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_relations:
            data['user'] = self.user.to_dict() if self.user else None
        return data

class OrderItem(TimestampMixin, db.Model):
    __tablename__ = 'order_items'
    __table_args__ = (
        db.CheckConstraint('quantity > 0', name='ck_order_items_quantity_positive'),
    )
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    order_id = db.Column(db.String(36), db.ForeignKey('orders.id'), nullable=False, index=True)
    product_id = db.Column(db.String(36), db.ForeignKey('products.id'), nullable=False, index=True)
    quantity = db.Column(db.Integer, nullable=False)
    unit_price = db.Column(db.Float, nullable=False)

    # items are removed through the order item service so stock is released
    order = db.relationship('Order', backref=db.backref('items', lazy='dynamic'))
    product = db.relationship('Product', backref=db.backref('order_items', lazy='dynamic'))

    @property
    def line_total(self):
        return self.quantity * self.unit_price

    def __repr__(self):
        return f'<OrderItem {self.product_id} x{self.quantity}>'

    def to_dict(self, include_relations=False):
        data = {
            'id': self.id,
            'order_id': self.order_id,
            'product_id': self.product_id,
            'quantity': self.quantity,
            'unit_price': self.unit_price,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_relations:
            data['order'] = self.order.to_dict() if self.order else None
            data['product'] = self.product.to_dict() if self.product else None
        return data
