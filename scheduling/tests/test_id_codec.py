from django.test import SimpleTestCase

from scheduling.exceptions import InvalidId
from scheduling.services.id_codec import MAX_ID, format_id, parse_id, parse_ids


class IdCodecTests(SimpleTestCase):
    def test_parse_valid(self):
        self.assertEqual(parse_id("12345"), 12345)
        self.assertEqual(parse_id(" 42 "), 42)
        self.assertEqual(parse_id(7), 7)

    def test_parse_max_64_bit(self):
        self.assertEqual(parse_id(str(MAX_ID)), 2 ** 63 - 1)

    def test_parse_rejects_bad_values(self):
        for value in (None, "", "abc", "-1", "0", "1.5", str(MAX_ID + 1), True, 0):
            with self.assertRaises(InvalidId, msg=repr(value)):
                parse_id(value)

    def test_parse_ids_keeps_order(self):
        self.assertEqual(parse_ids(["3", "1", "2"]), [3, 1, 2])

    def test_parse_ids_rejects_any_bad(self):
        with self.assertRaises(InvalidId):
            parse_ids(["1", "x"])

    def test_format(self):
        self.assertEqual(format_id(6000000011), "6000000011")
        self.assertEqual(parse_id(format_id(2 ** 60)), 2 ** 60)
