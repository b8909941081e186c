"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here so that exception constructors never
    build their own text. Keeps messages testable and consistent.
    """

    @staticmethod
    def message_not_found(code: str, locale: str) -> Diagnostic:
        """Message code unresolved after basenames, locales and parents.

        Args:
            code: The message code that was not found
            locale: Locale tag the lookup ran for

        Returns:
            Diagnostic for MESSAGE_NOT_FOUND
        """
        msg = f"No message found under code '{code}' for locale '{locale}'"
        return Diagnostic(
            code=DiagnosticCode.MESSAGE_NOT_FOUND,
            message=msg,
            hint="Define the code in one of the configured basenames or pass a default message",
        )

    @staticmethod
    def resolvable_not_found(codes: tuple[str, ...], locale: str) -> Diagnostic:
        """No code of a resolvable resolved and it carried no default.

        Args:
            codes: Candidate codes tried in order
            locale: Locale tag the lookup ran for

        Returns:
            Diagnostic for RESOLVABLE_NOT_FOUND
        """
        joined = ", ".join(f"'{code}'" for code in codes) or "<none>"
        msg = f"No message found under codes [{joined}] for locale '{locale}'"
        return Diagnostic(
            code=DiagnosticCode.RESOLVABLE_NOT_FOUND,
            message=msg,
            hint="Give the resolvable a default message or define one of its codes",
        )

    @staticmethod
    def malformed_location(location: str, reason: str) -> Diagnostic:
        """Location string cannot be interpreted by any strategy.

        Args:
            location: The offending location string
            reason: Short explanation of the structural problem

        Returns:
            Diagnostic for MALFORMED_LOCATION
        """
        msg = f"Malformed resource location {location!r}: {reason}"
        return Diagnostic(
            code=DiagnosticCode.MALFORMED_LOCATION,
            message=msg,
            hint="Use 'classpath:<path>', an absolute path, a file/http URL or a registered scheme",
        )

    @staticmethod
    def resource_not_found(description: str) -> Diagnostic:
        """Resource handle opened but nothing exists behind it.

        Args:
            description: Human-readable resource description

        Returns:
            Diagnostic for RESOURCE_NOT_FOUND
        """
        msg = f"{description} cannot be opened because it does not exist"
        return Diagnostic(
            code=DiagnosticCode.RESOURCE_NOT_FOUND,
            message=msg,
            location=description,
        )

    @staticmethod
    def resource_access_denied(description: str, detail: str) -> Diagnostic:
        """Resource exists but the process may not read it.

        Args:
            description: Human-readable resource description
            detail: Underlying OS error text

        Returns:
            Diagnostic for RESOURCE_ACCESS_DENIED
        """
        msg = f"Access denied reading {description}: {detail}"
        return Diagnostic(
            code=DiagnosticCode.RESOURCE_ACCESS_DENIED,
            message=msg,
            location=description,
            hint="Check file permissions of the bundle resource",
        )

    @staticmethod
    def resource_io_failure(description: str, detail: str) -> Diagnostic:
        """Resource exists but reading it failed.

        Args:
            description: Human-readable resource description
            detail: Underlying error text

        Returns:
            Diagnostic for RESOURCE_IO_FAILURE
        """
        msg = f"I/O failure reading {description}: {detail}"
        return Diagnostic(
            code=DiagnosticCode.RESOURCE_IO_FAILURE,
            message=msg,
            location=description,
        )

    @staticmethod
    def relative_resource_unsupported(description: str) -> Diagnostic:
        """Handle variant cannot derive sibling handles.

        Args:
            description: Human-readable resource description

        Returns:
            Diagnostic for RELATIVE_RESOURCE_UNSUPPORTED
        """
        msg = f"Cannot create a relative resource for {description}"
        return Diagnostic(
            code=DiagnosticCode.RELATIVE_RESOURCE_UNSUPPORTED,
            message=msg,
            location=description,
        )

    @staticmethod
    def bundle_decode_failed(description: str, encoding: str, detail: str) -> Diagnostic:
        """Bundle bytes are not valid in the configured encoding.

        Args:
            description: Human-readable resource description
            encoding: Encoding used for decoding
            detail: Codec error text

        Returns:
            Diagnostic for BUNDLE_DECODE_FAILED
        """
        msg = f"Cannot decode {description} as {encoding}: {detail}"
        return Diagnostic(
            code=DiagnosticCode.BUNDLE_DECODE_FAILED,
            message=msg,
            location=description,
            hint="Check default_encoding matches the encoding the bundle was saved with",
        )

    @staticmethod
    def bundle_syntax_error(description: str, line: int, detail: str) -> Diagnostic:
        """Bundle text violates the key=value format.

        Args:
            description: Human-readable resource description
            line: 1-based line number of the offending entry
            detail: Short explanation

        Returns:
            Diagnostic for BUNDLE_SYNTAX_ERROR
        """
        msg = f"Syntax error in {description} at line {line}: {detail}"
        return Diagnostic(
            code=DiagnosticCode.BUNDLE_SYNTAX_ERROR,
            message=msg,
            location=description,
            line=line,
        )

    @staticmethod
    def argument_format_invalid(
        index: int, format_type: str, style: str, detail: str
    ) -> Diagnostic:
        """Typed placeholder rejected by the locale formatter.

        Args:
            index: Placeholder argument index
            format_type: Format type (number, date, ...)
            style: Style or pattern given in the placeholder
            detail: Underlying error text

        Returns:
            Diagnostic for ARGUMENT_FORMAT_INVALID
        """
        msg = f"Cannot format argument {{{index}}} as {format_type} with style {style!r}: {detail}"
        return Diagnostic(
            code=DiagnosticCode.ARGUMENT_FORMAT_INVALID,
            message=msg,
        )

    @staticmethod
    def placeholder_invalid(template: str, detail: str) -> Diagnostic:
        """Template contains a placeholder that cannot be parsed.

        Args:
            template: The message template
            detail: Short explanation

        Returns:
            Diagnostic for PLACEHOLDER_INVALID
        """
        msg = f"Invalid placeholder in template {template!r}: {detail}"
        return Diagnostic(
            code=DiagnosticCode.PLACEHOLDER_INVALID,
            message=msg,
            hint="Placeholders look like {0}, {1,number} or {2,date,short}",
        )

    @staticmethod
    def config_invalid(field: str, detail: str) -> Diagnostic:
        """Construction-time configuration rejected.

        Args:
            field: Configuration field name
            detail: What is wrong with it

        Returns:
            Diagnostic for CONFIG_INVALID
        """
        msg = f"Invalid configuration for '{field}': {detail}"
        return Diagnostic(
            code=DiagnosticCode.CONFIG_INVALID,
            message=msg,
        )
