from typing import Annotated

from fastapi import Depends

from mailscore.services.email_validation import EmailValidationService, get_validation_service

# Type aliases for dependency injection
ValidationService = Annotated[EmailValidationService, Depends(get_validation_service)]
