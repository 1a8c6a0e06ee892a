"""Customer facing escalation texts."""

# Shown inside business hours.
QUICK_ESCALATION_MESSAGE = (
    "รบกวนคุณลูกค้ารอเจ้าหน้าที่ฝ่ายบริการตอบกลับอีกครั้งนะคะ "
    "คุณลูกค้าสามารถพิมพ์คำถามไว้ได้เลยค่ะ"
)

# Shown outside business hours, with the published operating hours.
FULL_ESCALATION_MESSAGE = (
    "รบกวนคุณลูกค้ารอเจ้าหน้าที่ฝ่ายบริการตอบกลับอีกครั้งนะคะ "
    "ทั้งนี้เจ้าหน้าที่ฝ่ายบริการทำการจันทร์-เสาร์ เวลา 09.00-00.00 น. "
    "และวันอาทิตย์ทำการเวลา 09.00-18.00 น. ค่ะ "
    "คุณลูกค้าสามารถพิมพ์คำถามไว้ได้เลยนะคะ "
    "เจ้าหน้าที่จะทำการตอบกลับอีกครั้งในวเลาทำการค่ะ"
)

OPERATING_HOURS_TEXT = "จันทร์-เสาร์ เวลา 09.00-00.00 น."

APOLOGY_MESSAGE = "ขออภัย เกิดข้อผิดพลาด กรุณาลองใหม่อีกครั้ง"

SUPPRESSED_MESSAGE = ""


def select_escalation_message(within_business_hours: bool) -> str:
    """Pick the quick or full escalation text."""
    if within_business_hours:
        return QUICK_ESCALATION_MESSAGE
    return FULL_ESCALATION_MESSAGE
