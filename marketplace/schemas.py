from marshmallow import EXCLUDE, Schema, fields, validate


class ProductSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.Str(required=True, validate=validate.Length(min=1))
    description = fields.Str(allow_none=True)
    price = fields.Float(required=True, validate=validate.Range(min=0))
    images = fields.List(fields.Str())
    category_id = fields.Str(data_key='categoryId', allow_none=True)
    tags = fields.List(fields.Str())
    condition = fields.Str(allow_none=True)
    vendor_location = fields.Str(data_key='vendorLocation', allow_none=True)


class BusinessProfileSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    business_name = fields.Str(
        data_key='businessName',
        required=True,
        validate=validate.Length(min=1, max=200))
    business_email = fields.Email(data_key='businessEmail', allow_none=True)
    business_phone = fields.Str(data_key='businessPhone', allow_none=True)
    business_whatsapp_number = fields.Str(
        data_key='whatsAppNumber',
        required=True,
        validate=validate.Length(min=4))
    cover_image = fields.Str(data_key='coverImage', allow_none=True)
    profile_image = fields.Str(data_key='profileImage', allow_none=True)
    address = fields.Str(required=True, validate=validate.Length(min=1))
    description = fields.Str(allow_none=True)


class BusinessProfileUpdateSchema(Schema):
    # No status field: status only changes through admin review.
    class Meta:
        unknown = EXCLUDE

    business_name = fields.Str(validate=validate.Length(min=1, max=200))
    business_email = fields.Email(allow_none=True)
    business_phone = fields.Str(allow_none=True)
    business_whatsapp_number = fields.Str(validate=validate.Length(min=4))
    cover_image = fields.Str(allow_none=True)
    profile_image = fields.Str(allow_none=True)
    address = fields.Str(validate=validate.Length(min=1))
    description = fields.Str(allow_none=True)
