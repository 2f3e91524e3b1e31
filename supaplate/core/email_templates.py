CONTACT_TEMPLATE = """
<p><b>Name:</b> {{ name }}</p>
<p><b>Email:</b> {{ email }}</p>
<p><b>Message:</b> {{ message }}</p>
"""

WELCOME_TEMPLATE = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Welcome to Supaplate</title>
</head>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
    <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
        <h1 style="font-size: 24px;">Welcome to Supaplate!</h1>
        <p>Thanks for signing up. Here is the profile we created for you:</p>
        <pre style="background-color: #f4f4f5; padding: 12px; border-radius: 6px;">{{ profile }}</pre>
    </div>
</body>
</html>
"""
