class AppStatusCode:
    # Success
    DATA_RETRIEVED_SUCCESSFULLY = "100"
    OPERATION_SUCCESSFUL = "101"

    # Validation
    REQUIRED_VALIDATION_ERROR = "200"
    INVALID_INPUT = "201"
    DUPLICATE_ADD_ERROR = "202"

    # Lookup
    NOT_FOUND = "300"

    # Operation
    OPERATION_FAILED = "400"
    OPERATION_ERROR = "401"
    UNAUTHORIZED_ACTION = "402"
