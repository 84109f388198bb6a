from datetime import datetime


class Validator:
    @staticmethod
    def validate_reminder_input(data):
        errors = []

        medicine_id = data.get('medicine_id')
        if medicine_id is None or medicine_id == "":
            errors.append("Please select a medicine from the suggestions.")
        else:
            try:
                int(medicine_id)
            except (TypeError, ValueError):
                errors.append(f"Invalid medicine id: {medicine_id}.")

        time_value = data.get('time')
        if time_value is not None:
            try:
                datetime.strptime(str(time_value), "%H:%M")
            except ValueError:
                errors.append(f"Invalid time format: {time_value}. Use HH:MM.")

        return errors

    @staticmethod
    def validate_query(query):
        if query is None:
            return "Query parameter 'q' is required."
        return None
