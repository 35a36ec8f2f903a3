import math
from decimal import Decimal, InvalidOperation

from integrator.exceptions import MalformedRecord

QPI_COLUMNS = {
    'ASIN': 'asin',
    'Description': 'name',
    'SIOC': 'sioc_status',
}

STATUS_COLUMNS = {
    'summaries_0_asin': 'asin',
    'summaries_0_itemName': 'name',
}

PIM_TEXT_COLUMNS = {
    'Legal Name': 'legal_name',
    'UPC Number': 'upc_number',
    'Brand (Product Line)': 'brand',
    'Age Grade': 'age_grade',
    'Product Description (internal)': 'product_description',
    'Item Spec Sheet Status': 'pim_spec_status',
    'Product Development Status': 'product_dev_status',
}

PIM_NUMERIC_COLUMNS = {
    'Single Package Size - Length (cm)': 'package_length_cm',
    'Single Package Size - Width (cm)': 'package_width_cm',
    'Single Package Size - Height (cm)': 'package_height_cm',
    'Single Package Size - Weight (kg)': 'package_weight_kg',
}

FINALIZED = 'finalized'


def clean_text(value):
    """Normalise a raw cell to a stripped string, or None when empty."""
    if value is None:
        return None
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return None
        # Spreadsheets hand back numeric codes (UPCs, item numbers) as floats.
        if value.is_integer():
            return str(int(value))
    text = str(value).strip()
    return text or None


def to_float(value):
    """Parse a number; anything unparseable is absent, never zero."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().replace(',', '.')
        if not text:
            return None
        try:
            number = float(Decimal(text))
        except (InvalidOperation, ValueError):
            # ValueError: signalling NaN refuses float conversion.
            return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def to_int(value):
    number = to_float(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def is_truthy(value):
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip().lower() not in ('', '0', 'false', 'no', 'none', 'null')
    return bool(value)


def natural_key(raw, column):
    if None in raw:
        raise MalformedRecord(f"row has {len(raw[None])} cells beyond the header")
    value = raw.get(column)
    if isinstance(value, (list, tuple, dict, set)):
        raise MalformedRecord(f"non-scalar {column!r}: {value!r}")
    return clean_text(value)


def _text_fields(raw, columns):
    fields = {}
    for column, field in columns.items():
        value = clean_text(raw.get(column))
        if value is not None:
            fields[field] = value
    return fields


def canonical(sku, fields, flags):
    return {'sku': sku, 'fields': fields, 'flags': flags}


def deduplicate(records):
    """Collapse repeated SKUs within one feed; the last occurrence wins."""
    seen = {}
    for record in records:
        seen[record['sku']] = record
    return list(seen.values())


def map_qpi_record(raw):
    sku = natural_key(raw, 'Item no')
    if sku is None:
        return None
    fields = _text_fields(raw, QPI_COLUMNS)
    # Listed in the validation extract means the order came in.
    flags = {'order_received': True, 'stage_5_product_ordered': True}
    return canonical(sku, fields, flags)


def map_status_record(raw):
    sku = natural_key(raw, 'sku')
    if sku is None:
        return None
    fields = _text_fields(raw, STATUS_COLUMNS)
    flags = {'stage_4_product_listed': True}
    if is_truthy(raw.get('summaries_0_status_0')):
        flags['vendor_central_setup'] = True
    return canonical(sku, fields, flags)


def map_pim_record(raw):
    sku = natural_key(raw, 'Item Number')
    if sku is None:
        return None

    fields = _text_fields(raw, PIM_TEXT_COLUMNS)
    if 'legal_name' in fields:
        fields['name'] = fields['legal_name']

    case_pack = to_int(raw.get('Case Pack'))
    if case_pack is not None:
        fields['case_pack'] = case_pack
    for column, field in PIM_NUMERIC_COLUMNS.items():
        number = to_float(raw.get(column))
        if number is not None:
            fields[field] = number

    flags = {}
    if (fields.get('product_dev_status') or '').lower() == FINALIZED:
        flags['stage_2_product_finalized'] = True
    return canonical(sku, fields, flags)


MAPPERS = {
    'qpi': map_qpi_record,
    'status': map_status_record,
    'pim': map_pim_record,
}
