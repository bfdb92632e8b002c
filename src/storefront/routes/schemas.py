from marshmallow import Schema, fields, validate, validates, validates_schema, ValidationError

from storefront.models.notification import NOTIFICATION_TYPES
from storefront.models.order import ORDER_STATUSES, ORDER_TYPES, PAYMENT_STATUSES
from storefront.models.product import PRODUCT_STATUSES
from storefront.models.review import REVIEW_STATUSES
from storefront.models.user import USER_ROLES
from storefront.utils.validators import ValidationUtils

_non_negative = validate.Range(min=0)


def _id_list():
    return fields.List(fields.Int(strict=True), required=True, validate=validate.Length(min=1))


# ---------------------------------------------------------------- users ----


class RegisterSchema(Schema):
    email = fields.Str(required=True)
    password = fields.Str(required=True)
    name = fields.Str(required=True, validate=validate.Length(min=1, max=ValidationUtils.MAX_NAME_LENGTH))
    image = fields.Str(load_default=None)
    phone = fields.Str(load_default=None, validate=validate.Length(max=ValidationUtils.MAX_PHONE_LENGTH))

    @validates("email")
    def check_email(self, value, **kwargs):
        if not ValidationUtils.validate_email(value):
            raise ValidationError("Invalid email address.")

    @validates("password")
    def check_password(self, value, **kwargs):
        if not ValidationUtils.validate_password(value)["is_valid"]:
            raise ValidationError(
                f"Password must be {ValidationUtils.MIN_PASSWORD_LENGTH}-"
                f"{ValidationUtils.MAX_PASSWORD_LENGTH} characters."
            )

    @validates("phone")
    def check_phone(self, value, **kwargs):
        if value and not ValidationUtils.validate_phone_number(value):
            raise ValidationError("Invalid phone number.")


class LoginSchema(Schema):
    email = fields.Str(required=True)
    password = fields.Str(required=True)


class ChangePasswordSchema(Schema):
    current_password = fields.Str(required=True)
    new_password = fields.Str(required=True)

    @validates("new_password")
    def check_password(self, value, **kwargs):
        if not ValidationUtils.validate_password(value)["is_valid"]:
            raise ValidationError(
                f"Password must be {ValidationUtils.MIN_PASSWORD_LENGTH}-"
                f"{ValidationUtils.MAX_PASSWORD_LENGTH} characters."
            )


class UserUpdateSchema(Schema):
    name = fields.Str(validate=validate.Length(min=1, max=ValidationUtils.MAX_NAME_LENGTH))
    image = fields.Str(allow_none=True)
    phone = fields.Str(allow_none=True, validate=validate.Length(max=ValidationUtils.MAX_PHONE_LENGTH))
    role = fields.Str(validate=validate.OneOf(USER_ROLES))

    @validates("phone")
    def check_phone(self, value, **kwargs):
        if value and not ValidationUtils.validate_phone_number(value):
            raise ValidationError("Invalid phone number.")


class IdListSchema(Schema):
    ids = _id_list()


class BulkStatusSchema(Schema):
    ids = _id_list()
    status = fields.Str(required=True)


# ------------------------------------------------------------- catalog ----


class CategorySchema(Schema):
    name = fields.Str(required=True, validate=validate.Length(min=1))
    slug = fields.Str(required=True)
    description = fields.Str(load_default=None, allow_none=True)
    image = fields.Str(load_default=None, allow_none=True)
    sort_order = fields.Int(load_default=None, allow_none=True)

    @validates("slug")
    def check_slug(self, value, **kwargs):
        if not ValidationUtils.validate_slug(value):
            raise ValidationError("Slug may only contain lower-case letters, digits and dashes.")


class CategoryBulkSchema(Schema):
    categories = fields.List(fields.Nested(CategorySchema), required=True, validate=validate.Length(min=1))


class ProductSchema(Schema):
    name = fields.Str(required=True, validate=validate.Length(min=1))
    slug = fields.Str(required=True)
    description = fields.Str(required=True)
    price = fields.Int(required=True, strict=True, validate=_non_negative)
    compare_at_price = fields.Int(load_default=None, allow_none=True, strict=True, validate=_non_negative)
    images = fields.List(fields.Str(), load_default=list)
    status = fields.Str(load_default="draft", validate=validate.OneOf(PRODUCT_STATUSES))
    stock = fields.Int(load_default=0, strict=True, validate=_non_negative)
    sku = fields.Str(load_default=None, allow_none=True)
    category_ids = fields.List(fields.Raw(), load_default=list)

    @validates("slug")
    def check_slug(self, value, **kwargs):
        if not ValidationUtils.validate_slug(value):
            raise ValidationError("Slug may only contain lower-case letters, digits and dashes.")


class ProductBulkSchema(Schema):
    products = fields.List(fields.Nested(ProductSchema), required=True, validate=validate.Length(min=1))


class ProductUpdateSchema(Schema):
    """Product patch: only the keys sent are loaded, no defaults are filled in."""
    name = fields.Str(validate=validate.Length(min=1))
    slug = fields.Str()
    description = fields.Str()
    price = fields.Int(strict=True, validate=_non_negative)
    compare_at_price = fields.Int(allow_none=True, strict=True, validate=_non_negative)
    images = fields.List(fields.Str())
    status = fields.Str(validate=validate.OneOf(PRODUCT_STATUSES))
    stock = fields.Int(strict=True, validate=_non_negative)
    sku = fields.Str(allow_none=True)
    category_ids = fields.List(fields.Raw())

    @validates("slug")
    def check_slug(self, value, **kwargs):
        if not ValidationUtils.validate_slug(value):
            raise ValidationError("Slug may only contain lower-case letters, digits and dashes.")


class ProductBulkUpdateItemSchema(ProductUpdateSchema):
    product_id = fields.Int(required=True, strict=True)


class ProductBulkUpdateSchema(Schema):
    updates = fields.List(
        fields.Nested(ProductBulkUpdateItemSchema),
        required=True,
        validate=validate.Length(min=1),
    )


class ProductBulkStatusSchema(BulkStatusSchema):
    status = fields.Str(required=True, validate=validate.OneOf(PRODUCT_STATUSES))


# -------------------------------------------------------- cart/wishlist ----


class CartLineSchema(Schema):
    product_id = fields.Int(required=True, strict=True)
    quantity = fields.Int(required=True, strict=True, validate=validate.Range(min=1, max=999))
    price_snapshot = fields.Int(required=True, strict=True, validate=_non_negative)


class CartItemsSchema(Schema):
    items = fields.List(fields.Nested(CartLineSchema), required=True)


class CartQuantitySchema(Schema):
    # Zero or negative removes the line.
    quantity = fields.Int(required=True, strict=True, validate=validate.Range(max=999))
    price_snapshot = fields.Int(required=True, strict=True, validate=_non_negative)


class WishlistItemSchema(Schema):
    product_id = fields.Int(required=True, strict=True)


class WishlistSetSchema(Schema):
    product_ids = fields.List(fields.Int(strict=True), required=True)


# -------------------------------------------------------------- orders ----


class ShippingAddressSchema(Schema):
    line1 = fields.Str(required=True)
    line2 = fields.Str(load_default=None, allow_none=True)
    city = fields.Str(required=True)
    state = fields.Str(load_default=None, allow_none=True)
    postal_code = fields.Str(required=True)
    country = fields.Str(required=True)
    phone = fields.Str(load_default=None, allow_none=True)
    whatsapp_number = fields.Str(load_default=None, allow_none=True)
    email = fields.Str(load_default=None, allow_none=True)


class CheckoutAddressSchema(ShippingAddressSchema):
    """Checkout checks completeness itself, so every part is optional here."""
    line1 = fields.Str(load_default=None, allow_none=True)
    city = fields.Str(load_default=None, allow_none=True)
    postal_code = fields.Str(load_default=None, allow_none=True)
    country = fields.Str(load_default=None, allow_none=True)


class OrderItemSchema(Schema):
    product_id = fields.Int(required=True, strict=True)
    quantity = fields.Int(required=True, strict=True, validate=validate.Range(min=1))
    price_snapshot = fields.Int(required=True, strict=True, validate=_non_negative)
    name = fields.Str(required=True)


class OrderCreateSchema(Schema):
    items = fields.List(fields.Nested(OrderItemSchema), required=True, validate=validate.Length(min=1))
    subtotal = fields.Int(required=True, strict=True, validate=_non_negative)
    shipping = fields.Int(load_default=None, allow_none=True, strict=True, validate=_non_negative)
    tax = fields.Int(load_default=None, allow_none=True, strict=True, validate=_non_negative)
    total = fields.Int(required=True, strict=True, validate=_non_negative)
    order_type = fields.Str(load_default="delivery", validate=validate.OneOf(ORDER_TYPES))
    shipping_address = fields.Nested(ShippingAddressSchema, load_default=None, allow_none=True)


class CheckoutSchema(Schema):
    order_type = fields.Str(load_default="delivery", validate=validate.OneOf(ORDER_TYPES))
    shipping_address = fields.Nested(CheckoutAddressSchema, load_default=None, allow_none=True)


class OrderUpdateSchema(Schema):
    status = fields.Str(validate=validate.OneOf(ORDER_STATUSES))
    payment_id = fields.Int(strict=True)
    shipping_address = fields.Nested(ShippingAddressSchema)


class OrderBulkStatusSchema(BulkStatusSchema):
    status = fields.Str(required=True, validate=validate.OneOf(ORDER_STATUSES))


# ------------------------------------------------------------ payments ----


class PaymentCreateSchema(Schema):
    order_id = fields.Int(required=True, strict=True)
    amount = fields.Int(required=True, strict=True, validate=_non_negative)
    currency = fields.Str(required=True, validate=validate.Length(equal=3))
    status = fields.Str(load_default="pending", validate=validate.OneOf(PAYMENT_STATUSES))
    whatsapp_thread_id = fields.Str(load_default=None, allow_none=True)
    whatsapp_message_id = fields.Str(load_default=None, allow_none=True)
    notes = fields.Str(load_default=None, allow_none=True)


class PaymentUpdateSchema(Schema):
    status = fields.Str(validate=validate.OneOf(PAYMENT_STATUSES))
    whatsapp_thread_id = fields.Str(allow_none=True)
    whatsapp_message_id = fields.Str(allow_none=True)
    notes = fields.Str(allow_none=True)


class PaymentBulkStatusSchema(BulkStatusSchema):
    status = fields.Str(required=True, validate=validate.OneOf(PAYMENT_STATUSES))


# ------------------------------------------------------------- reviews ----


class ReviewCreateSchema(Schema):
    product_id = fields.Int(required=True, strict=True)
    order_id = fields.Int(load_default=None, allow_none=True, strict=True)
    # Range is checked by the handler so the message is the same everywhere.
    rating = fields.Int(required=True, strict=True)
    title = fields.Str(load_default=None, allow_none=True)
    body = fields.Str(required=True)


class ReviewUpdateSchema(Schema):
    rating = fields.Int(strict=True)
    title = fields.Str(allow_none=True)
    body = fields.Str()
    status = fields.Str(validate=validate.OneOf(REVIEW_STATUSES))


class ReviewBulkStatusSchema(BulkStatusSchema):
    status = fields.Str(required=True, validate=validate.OneOf(REVIEW_STATUSES))


# ------------------------------------------------------- notifications ----


class NotificationCreateSchema(Schema):
    user_id = fields.Int(required=True, strict=True)
    type = fields.Str(required=True, validate=validate.OneOf(NOTIFICATION_TYPES))
    title = fields.Str(required=True, validate=validate.Length(min=1))
    body = fields.Str(load_default=None, allow_none=True)
    link = fields.Str(load_default=None, allow_none=True)
    metadata = fields.Dict(load_default=None, allow_none=True)


class NotificationBulkSchema(Schema):
    notifications = fields.List(
        fields.Nested(NotificationCreateSchema), required=True, validate=validate.Length(min=1)
    )


# ------------------------------------------------------------ settings ----


class SettingsUpdateSchema(Schema):
    store_name = fields.Str()
    payment_phone = fields.Str()
    payment_name = fields.Str()
    admin_whatsapp = fields.Str()
    default_country = fields.Str()
    currency = fields.Str(validate=validate.Length(equal=3))
    free_shipping_threshold_pesewas = fields.Int(strict=True, validate=_non_negative)
    shipping_flat_rate_pesewas = fields.Int(strict=True, validate=_non_negative)
    tax_rate_percent = fields.Float(validate=validate.Range(min=0, max=100))
    maintenance_mode = fields.Bool()

    @validates_schema
    def check_not_empty(self, data, **kwargs):
        if not data:
            raise ValidationError("Nothing to update.")
