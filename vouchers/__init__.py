"""
Vouchers.

Printed or emailed redemption codes that turn into a live license the
first time they are redeemed.
"""
