class FixTag:
    # --- Standard Header ---
    BEGIN_STRING       = 8   # (e.g., FIX.4.4)
    BODY_LENGTH        = 9
    MSG_TYPE           = 35  # (e.g., A=Logon, 5=Logout)
    SENDER_COMP_ID     = 49
    TARGET_COMP_ID     = 56
    MSG_SEQ_NUM        = 34
    SENDING_TIME       = 52

    # --- Standard Trailer ---
    CHECKSUM           = 10

    # --- Application ---
    CL_ORD_ID          = 11  # Client Order ID, filled from TokenGenerator


# Tags whose position on the wire is fixed by the protocol framing
FRAMING_HEAD = (FixTag.BEGIN_STRING, FixTag.BODY_LENGTH, FixTag.MSG_TYPE)


class FixMsgType:
    HEARTBEAT        = "0"
    LOGOUT           = "5"
    LOGON            = "A"
    NEW_ORDER_SINGLE = "D"
