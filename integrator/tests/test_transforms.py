from django.test import SimpleTestCase

from integrator.exceptions import MalformedRecord
from integrator.transforms import (
    clean_text,
    map_pim_record,
    map_qpi_record,
    map_status_record,
    to_float,
    to_int,
)


def _pim_row(**overrides):
    row = {
        'Item Number': 'SKU-001',
        'Legal Name': 'Espresso Machine',
        'UPC Number': 812345678901.0,
        'Brand (Product Line)': 'Brewline',
        'Age Grade': '14+',
        'Product Description (internal)': 'Dual boiler',
        'Item Spec Sheet Status': 'Approved',
        'Product Development Status': 'Finalized',
        'Case Pack': 4,
        'Single Package Size - Length (cm)': 40.5,
        'Single Package Size - Width (cm)': '30',
        'Single Package Size - Height (cm)': '25,5',
        'Single Package Size - Weight (kg)': 'TBD',
    }
    row.update(overrides)
    return row


class TestHelpers(SimpleTestCase):
    def test_clean_text_blank_is_absent(self):
        self.assertIsNone(clean_text('   '))
        self.assertIsNone(clean_text(None))
        self.assertIsNone(clean_text(float('nan')))

    def test_clean_text_integral_float(self):
        self.assertEqual(clean_text(812345678901.0), '812345678901')
        self.assertEqual(clean_text(12.5), '12.5')

    def test_to_float_unparseable_is_absent_not_zero(self):
        self.assertIsNone(to_float('TBD'))
        self.assertIsNone(to_float(''))
        self.assertIsNone(to_float('inf'))
        self.assertEqual(to_float('0'), 0.0)
        self.assertEqual(to_float('25,5'), 25.5)

    def test_to_float_signalling_nan_is_absent(self):
        self.assertIsNone(to_float('sNaN'))
        self.assertIsNone(to_float('NaN'))
        self.assertIsNone(to_int('sNaN'))

    def test_to_int_rejects_fractions(self):
        self.assertEqual(to_int('12'), 12)
        self.assertIsNone(to_int('12.5'))


class TestQpiMapping(SimpleTestCase):
    def test_maps_columns_and_flags(self):
        record = map_qpi_record({
            'Item no': ' SKU-001 ', 'ASIN': 'B000111', 'Description': 'Widget', 'SIOC': ' Y ',
        })
        self.assertEqual(record['sku'], 'SKU-001')
        self.assertEqual(record['fields'], {'asin': 'B000111', 'name': 'Widget', 'sioc_status': 'Y'})
        self.assertEqual(record['flags'], {'order_received': True, 'stage_5_product_ordered': True})

    def test_empty_values_are_omitted(self):
        record = map_qpi_record({'Item no': 'SKU-001', 'ASIN': '', 'Description': '  ', 'SIOC': ''})
        self.assertEqual(record['fields'], {})

    def test_missing_key_returns_none(self):
        self.assertIsNone(map_qpi_record({'Item no': '', 'ASIN': 'B000111'}))
        self.assertIsNone(map_qpi_record({'ASIN': 'B000111'}))

    def test_overflow_cells_are_malformed(self):
        with self.assertRaises(MalformedRecord):
            map_qpi_record({'Item no': 'SKU-001', None: ['extra']})


class TestStatusMapping(SimpleTestCase):
    def test_status_value_sets_vendor_setup(self):
        record = map_status_record({
            'sku': 'SKU-001', 'summaries_0_asin': 'B000111', 'summaries_0_status_0': 'BUYABLE',
        })
        self.assertEqual(record['fields'], {'asin': 'B000111'})
        self.assertEqual(
            record['flags'], {'stage_4_product_listed': True, 'vendor_central_setup': True},
        )

    def test_item_name_maps_to_name(self):
        record = map_status_record({
            'sku': 'SKU-001', 'summaries_0_itemName': ' Espresso Machine ', 'summaries_0_status_0': None,
        })
        self.assertEqual(record['fields'], {'name': 'Espresso Machine'})

    def test_blank_status_only_lists(self):
        record = map_status_record({'sku': 'SKU-001', 'summaries_0_status_0': None})
        self.assertEqual(record['flags'], {'stage_4_product_listed': True})

    def test_missing_sku_returns_none(self):
        self.assertIsNone(map_status_record({'sku': None, 'summaries_0_asin': 'B1'}))

    def test_non_scalar_key_is_malformed(self):
        with self.assertRaises(MalformedRecord):
            map_status_record({'sku': ['A', 'B']})


class TestPimMapping(SimpleTestCase):
    def test_full_row(self):
        record = map_pim_record(_pim_row())
        fields = record['fields']
        self.assertEqual(record['sku'], 'SKU-001')
        self.assertEqual(fields['name'], 'Espresso Machine')
        self.assertEqual(fields['legal_name'], 'Espresso Machine')
        self.assertEqual(fields['upc_number'], '812345678901')
        self.assertEqual(fields['case_pack'], 4)
        self.assertEqual(fields['package_length_cm'], 40.5)
        self.assertEqual(fields['package_width_cm'], 30.0)
        self.assertEqual(fields['package_height_cm'], 25.5)
        self.assertNotIn('package_weight_kg', fields)
        self.assertEqual(record['flags'], {'stage_2_product_finalized': True})

    def test_finalized_is_case_insensitive(self):
        record = map_pim_record(_pim_row(**{'Product Development Status': 'FINALIZED'}))
        self.assertTrue(record['flags']['stage_2_product_finalized'])

    def test_other_status_sets_no_flag(self):
        record = map_pim_record(_pim_row(**{'Product Development Status': 'In Progress'}))
        self.assertEqual(record['flags'], {})

    def test_blank_legal_name_writes_no_name(self):
        record = map_pim_record(_pim_row(**{'Legal Name': ''}))
        self.assertNotIn('name', record['fields'])
        self.assertNotIn('legal_name', record['fields'])

    def test_numeric_item_number(self):
        record = map_pim_record(_pim_row(**{'Item Number': 100234.0}))
        self.assertEqual(record['sku'], '100234')

    def test_missing_item_number(self):
        self.assertIsNone(map_pim_record(_pim_row(**{'Item Number': None})))

    def test_bad_numeric_cells_are_absent_not_fatal(self):
        record = map_pim_record(_pim_row(**{
            'Case Pack': 'sNaN', 'Single Package Size - Length (cm)': 'sNaN',
        }))
        self.assertNotIn('case_pack', record['fields'])
        self.assertNotIn('package_length_cm', record['fields'])
        self.assertEqual(record['fields']['package_width_cm'], 30.0)
